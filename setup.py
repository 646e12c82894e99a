"""
Setup file for user_registry
In-memory user registry HTTP service
"""

from setuptools import setup, find_packages

setup(
    name="user_registry",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        'flask>=2.3.0',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'requests>=2.31.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'user-registry=user_registry.server:main',
        ],
    },
)
