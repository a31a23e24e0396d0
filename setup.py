# setup.py
from setuptools import setup, find_packages

setup(
    name="focus_crawler",
    version="0.1.0",
    description="Asynchronous bounded-depth focused web crawler",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"focus_crawler.report": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.2",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "focus-crawler=focus_crawler.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
