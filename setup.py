"""
Setup script for windtunnel package.
"""

from setuptools import setup, find_packages

setup(
    name="windtunnel",
    version="0.1.0",
    description="2D Lattice Boltzmann wind tunnel with barriers, tracers and force readout",
    author="Andrey",
    packages=find_packages(include=["windtunnel", "windtunnel.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
)
