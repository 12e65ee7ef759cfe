"""
Reset the review history database.

DANGEROUS: This deletes all review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_history_db
"""

from recall import config
from recall.history import reset_db


def main():
    print("=" * 60)
    print("WARNING: Reset History Database")
    print("=" * 60)
    print()
    print(f"Database: {config.get_database_url()}")
    print("This will DELETE all review history:")
    print("  - All items (stability, difficulty, due dates)")
    print("  - All review sessions")
    print("  - All review events (logs of past reviews)")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        reset_db()
        print("✓ Database reset complete!")
        print("\nThe database now has empty tables ready for new lookups.")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()
