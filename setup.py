"""
Setup script for studyplan.

studyplan is the scheduling core of a study-planning app. It serves three
roles:

1. Exam Planner - Splits study hours across subjects and days before exams
2. Review Scheduler - SM-2 spaced repetition for flashcards
3. Study Coach - Learns session length and time of day from past sessions

The 'studyplan' command is a thin terminal front-end over the core.
"""

from setuptools import find_packages, setup

setup(
    name="studyplan",
    version="0.1.0",
    description="Exam study scheduling and spaced-repetition core",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["studyplan", "studyplan.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Similarity ordering
        "numpy>=1.24.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "studyplan=studyplan.delivery.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="study-planner spaced-repetition sm2 scheduling education",
)
