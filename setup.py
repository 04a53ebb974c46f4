from setuptools import setup, find_packages

setup(
    name="alumnilink",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "pydantic[email]",
        "pydantic-settings",
        "python-dotenv",
        "alembic"
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
