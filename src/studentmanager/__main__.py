"""Run with: python -m studentmanager"""
from studentmanager.main import main

if __name__ == "__main__":
    main()
