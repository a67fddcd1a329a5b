from setuptools import find_packages, setup

setup(
    name="sapphire-reader",
    version="0.1.0",
    description="Reader and REPL for the Sapphire Lisp surface syntax",
    packages=find_packages(include=["sapphire", "sapphire.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "sapphire=sapphire.cli:main",
        ],
    },
)
