from setuptools import setup, find_packages

setup(
    name="game2048",
    version="0.1.0",
    packages=find_packages(),
    install_requires=[
        "numpy",
        "pygame",
    ],
    python_requires=">=3.8",
)
