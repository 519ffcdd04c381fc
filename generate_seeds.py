#!/usr/bin/env python3
"""
Seed Generator
Turns scraped journal JSON files into Rails seed scripts
"""

import sys
from datetime import datetime

from src.seed_generator import SeedGenerator

JOURNALS_FILE = 'config/scientific_journals.csv'


def main():
    """Main function to generate seed scripts"""
    if len(sys.argv) > 3:
        print("Usage: python generate_seeds.py [input_dir] [output_dir]")
        sys.exit(1)

    input_dir = sys.argv[1] if len(sys.argv) > 1 else 'raw'
    output_dir = sys.argv[2] if len(sys.argv) > 2 else 'seeds'

    print(f"Starting seed generation at {datetime.now()}")

    generator = SeedGenerator(
        journals_file=JOURNALS_FILE,
        input_dir=input_dir,
        output_dir=output_dir
    )
    generated = generator.generate_all()

    if not generated:
        print(f"No seed files generated from {input_dir}")
        sys.exit(1)

    for path in generated:
        print(f"Seed file generated at {path}")


if __name__ == "__main__":
    main()
