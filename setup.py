"""
markov-engine — structural decomposition and stationary analysis of
finite discrete-time Markov chains.
"""

from setuptools import setup, find_packages

setup(
    name="markov-engine",
    version="1.0.0",
    description="Strongly connected classes, Hasse diagrams, periods and "
                "stationary distributions of discrete-time Markov chains.",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "markov-engine=markov_engine.cli:main",
        ],
    },
)
