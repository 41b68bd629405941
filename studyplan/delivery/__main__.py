"""
Entry point for running the study planner CLI as a module.

Usage:
    python -m studyplan.delivery plan subjects.json --end 2026-12-01
    python -m studyplan.delivery due cards.json
    python -m studyplan.delivery --help
"""
from .cli import main

if __name__ == "__main__":
    main()
