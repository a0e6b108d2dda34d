# setup.py
from setuptools import setup, find_packages

setup(
    name="sitemap_scout",
    version="0.1.0",
    description="Async URL extractor for sitemaps, sitemap indexes and RSS/Atom/RDF feeds",
    packages=find_packages(include=["sitemap_scout", "sitemap_scout.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "lxml>=4.9",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "click>=8.1",
        "python-dateutil>=2.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sitemap-scout=sitemap_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
