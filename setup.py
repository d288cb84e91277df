"""
setup.py

Packaging metadata and CLI entry point for bro.

Version: 1.0.0 — Streams file records through an external module bundler,
with watch mode and configurable error routing.
"""
from setuptools import setup, find_packages

setup(
    name="bro-bundler",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pydantic>=2.0",
        "PyYAML",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "bro=cli:cli",
        ],
    },
    python_requires=">=3.8",
)
