# setup.py
from setuptools import setup, find_packages

setup(
    name="pageripper",
    version="0.1.0",
    description="Async single-page link and hostname ripper",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"pageripper": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "aiosqlite>=0.19",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "SQLAlchemy[asyncio]>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["pageripper=pageripper.cli:cli"],
    },
    python_requires=">=3.11",
)
