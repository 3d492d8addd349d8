from setuptools import setup, find_packages

setup(
    name="dumpcopy",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "loguru",
        "sqlalchemy>=2.0",
        "pymysql",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dumpcopy=dumpcopy.cli:main",
        ],
    },
)
