from setuptools import setup, find_packages

setup(
    name="envbind",
    version="0.1.0",
    description="Bind environment variables into typed dataclass schemas",
    packages=find_packages(include=["envbind", "envbind.*"]),
    install_requires=[
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    python_requires=">=3.10",
)
