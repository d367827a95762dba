from setuptools import find_namespace_packages, setup

setup(
    name="testignore",
    version="0.1.0",
    description="Declarative test exclusions for multi-backend test suites",
    python_requires=">=3.12",
    packages=find_namespace_packages(include=["testignore", "testignore.*"]),
    install_requires=[
        "result>=0.17",
        "rich>=13.0",
        "typer>=0.12",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "console_scripts": ["testignore=testignore.cli.app:cli"],
    },
)
