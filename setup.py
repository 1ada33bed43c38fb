"""Setup script for the NexMeet Event Bot."""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith("#")]

with open("README.md", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="nexmeet-event-bot",
    version="1.0.0",
    description="Telegram bot and HTTP API for discovering NexMeet events",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="NexMeet",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "nexmeet-bot=nexmeet_bot.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
