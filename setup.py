"""Package setup for freebox_munin."""

from setuptools import setup, find_packages

setup(
    name="freebox-munin",
    version="1.0.0",
    description="Munin plugin scraping telemetry from the Freebox router web interface",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "beautifulsoup4>=4.12.0",
        "lxml>=5.0.0",
        "urllib3>=2.0.0",
        "colorlog>=6.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "freebox-munin=freebox_munin.cli:main",
        ],
    },
)
