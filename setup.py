# setup.py - Package the quaternion hash
from setuptools import setup, find_packages

setup(
    name="quaternion_hash",
    version="0.1.0",
    description="Order-sensitive, non-cryptographic hashing of text to unit quaternions",
    packages=find_packages(include=["quaternion_hash", "quaternion_hash.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.17",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
