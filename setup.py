"""
Setup script for the inspection report service.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="inspection-report-service",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"report_service": ["static/*.html"]},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "playwright>=1.40",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.26",
        ],
    },
    entry_points={
        "console_scripts": [
            "report-service=report_service.__main__:main",
        ],
    },
)
