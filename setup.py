from pathlib import Path

from setuptools import find_packages, setup

BASE_DIR = Path(__file__).parent
README = (BASE_DIR / "README.md").read_text(encoding="utf-8")

setup(
    name="pistats-service",
    version="0.1.0",
    description="FastAPI service that samples host metrics and serves the latest snapshot.",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Monitoring Stack",
    packages=find_packages(include=["pistats", "pistats.*"]),
    python_requires=">=3.9",
    include_package_data=True,
    package_data={"pistats": ["static/*"]},
    install_requires=[
        "fastapi>=0.115.0",
        "uvicorn[standard]>=0.32.0",
        "psutil>=5.9.0",
        "requests>=2.32.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pistats-service=pistats.main:main",
            "pistats-watch=pistats.poller:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
    ],
)
