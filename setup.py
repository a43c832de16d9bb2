"""Setup configuration for modgate."""

from setuptools import setup, find_packages

setup(
    name="modgate",
    version="0.1.0",
    description="Moderation decision core and data contracts for a Discord moderation service",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.4",
        "aiosqlite>=0.19",
        "PyYAML>=6.0",
        "jsonschema>=4.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
)
