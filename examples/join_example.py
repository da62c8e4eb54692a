"""Example usage of fuzzy joins with CSV files."""

import pandas as pd
import logging
from pathlib import Path
from typing import Optional

from fuzzyjoin import FuzzyJoiner, StringDistMatcher, GeoMatcher
from fuzzyjoin.joins import regex_left_join


def match_company_names(
    base_file: Path,
    match_file: Path,
    output_file: Optional[Path] = None,
    max_dist: int = 2,
    worker_threads: int = 1
) -> pd.DataFrame:
    """
    Left join two CSV files on approximately equal company names and postcodes.

    Args:
        base_file: CSV with a `name` and a `postcode` column
        match_file: CSV with a `company` and a `postcode` column
        output_file: Optional path for the joined CSV
        max_dist: Largest edit distance between names
        worker_threads: Threads splitting the base rows

    Returns:
        pd.DataFrame: Joined records with a `name_distance` column
    """
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s'
        )
        joiner = FuzzyJoiner(
            suffixes=('_base', '_match'),
            worker_threads=worker_threads,
            logger=logging.getLogger('company_join')
        )

        logging.info(f"Reading base file: {base_file}")
        base = pd.read_csv(base_file, dtype=str)
        logging.info(f"Reading match file: {match_file}")
        companies = pd.read_csv(match_file, dtype=str)

        names = StringDistMatcher(max_dist=max_dist, method='osa', ignore_case=True)
        postcodes = StringDistMatcher(max_dist=0, method='osa', ignore_case=True)
        results = joiner.join(
            base, companies,
            by=[('name', 'company'), 'postcode'],
            matcher=[names, postcodes],
            mode='left',
            distance_col='name_distance'
        )

        matched = results['name_distance'].notna().sum()
        logging.info("\nMatching Statistics:")
        logging.info(f"Base records: {len(base)}")
        logging.info(f"Output rows: {len(results)}")
        logging.info(f"Matched rows: {matched}")
        if matched:
            logging.info(
                f"Average name distance: {results['name_distance'].mean():.2f}"
            )

        if output_file:
            logging.info(f"\nSaving results to: {output_file}")
            results.to_csv(output_file, index=False)

        return results

    except Exception as e:
        logging.error(f"An error occurred: {e}", exc_info=True)
        raise


def nearby_stations() -> pd.DataFrame:
    """Pair weather stations within 50 km of each city."""
    cities = pd.DataFrame({
        'city': ['Amsterdam', 'Utrecht', 'Maastricht'],
        'lon': [4.90, 5.12, 5.69],
        'lat': [52.37, 52.09, 50.85],
    })
    stations = pd.DataFrame({
        'station': ['Schiphol', 'De Bilt', 'Beek'],
        'lon': [4.76, 5.18, 5.78],
        'lat': [52.30, 52.10, 50.91],
    })
    return FuzzyJoiner().join(
        cities, stations,
        by=['lon', 'lat'],
        matcher=GeoMatcher(max_dist=50, unit='km'),
        distance_col='km'
    )


def tag_log_lines() -> pd.DataFrame:
    """Attach every matching severity rule to each log line."""
    lines = pd.DataFrame({'message': ['disk full on /dev/sda1', 'user logged in', 'OOM killer invoked']})
    rules = pd.DataFrame({
        'message': [r'disk\s+full', r'\bOOM\b'],
        'severity': ['critical', 'critical'],
    })
    return regex_left_join(lines, rules, by='message', ignore_case=True)


if __name__ == "__main__":
    print(nearby_stations())
    print(tag_log_lines())

    base_file = Path('data/base_data.csv')
    match_file = Path('data/company_data.csv')
    if base_file.exists() and match_file.exists():
        match_company_names(
            base_file=base_file,
            match_file=match_file,
            output_file=Path('data/output_data.csv')
        )
