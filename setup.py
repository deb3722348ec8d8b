# setup.py
from setuptools import setup, find_packages

setup(
    name="lispy",
    version="0.0.0.0.7",
    description="Tree-walking evaluator for a small S-expression language",
    packages=find_packages(include=["lispy", "lispy.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["lispy=lispy.interpreter:main"],
    },
    zip_safe=False,
)
