#!/usr/bin/env python3
"""
Setup script for elvbank (step-driven elevator bank simulation)
"""
from setuptools import setup, find_packages

setup(
    name="elvbank",
    version="0.1.0",
    description="Tick-driven multi-car elevator bank with batch dispatching, SimPy driver and run analysis",
    keywords=["elevator", "simulation", "simpy", "dispatching"],
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "Topic :: Scientific/Engineering",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "simpy>=4.0.0",
        "numpy>=1.20.0",
        "matplotlib>=3.3.0",
        "pyyaml>=5.4",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "black>=22.0.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            # runs a scenario: elvbank-sim [scenario] [event_log.jsonl] [diagram.png]
            "elvbank-sim=main:main",
        ],
    },
)
