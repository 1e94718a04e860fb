import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

from core.config_loader import get_config
from core.matching import MatchingError
from database.database import db_session_scope
from database.init_db import init_db
from database.repositories import ProfileRepository
from database.uow import matching_uow

logger = logging.getLogger(__name__)


def load_seed_profiles(path: str) -> List[Dict[str, Any]]:
    """Read a list of profile dicts from a YAML or JSON file."""
    seed_path = Path(path)
    with open(seed_path, 'r', encoding='utf-8') as f:
        if seed_path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get('profiles', [])
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a list of profiles")
    return data


def seed(path: str) -> int:
    profiles = load_seed_profiles(path)
    with db_session_scope() as session:
        repo = ProfileRepository(session)
        for data in profiles:
            profile = repo.create_profile(data)
            logger.info(f"Created profile {profile.id} ({profile.display_name})")
    logger.info(f"Seeded {len(profiles)} profiles from {path}")
    return len(profiles)


def print_discover(user_id: int, limit: int) -> None:
    with matching_uow() as service:
        outcome = service.select_candidates_with_fallback(user_id, limit)
        if outcome.is_degraded:
            logger.warning(f"Degraded selection: {outcome.degraded.reason}")
        for rank, candidate in enumerate(outcome.candidates, start=1):
            b = candidate.breakdown
            print(
                f"{rank:>3}. #{candidate.profile.id:<6} {candidate.profile.display_name:<24} "
                f"score={candidate.score:>3} "
                f"(interests={b.interests} age={b.age} location={b.location} activity={b.activity})"
            )


def print_matches(user_id: int) -> None:
    with matching_uow() as service:
        for profile in service.get_matches(user_id):
            print(f"#{profile.id:<6} {profile.display_name}")


def main():
    parser = argparse.ArgumentParser(description="Kindred Matching Engine")
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('init-db', help='Create database tables')

    seed_parser = subparsers.add_parser('seed', help='Load profiles from a YAML or JSON file')
    seed_parser.add_argument('file', help='Path to the seed file')

    subparsers.add_parser('serve', help='Run the HTTP API')

    discover_parser = subparsers.add_parser('discover', help='Print ranked candidates for a profile')
    discover_parser.add_argument('user_id', type=int)
    discover_parser.add_argument('--limit', type=int, default=None)

    matches_parser = subparsers.add_parser('matches', help='Print mutual matches for a profile')
    matches_parser.add_argument('user_id', type=int)

    args = parser.parse_args()

    config = get_config()
    logging.basicConfig(
        level=config.logging.level,
        format=config.logging.format
    )

    try:
        if args.command == 'init-db':
            init_db()
        elif args.command == 'seed':
            init_db()
            seed(args.file)
        elif args.command == 'serve':
            from web.backend.app import main as serve
            serve()
        elif args.command == 'discover':
            print_discover(args.user_id, args.limit or config.matching.selector.default_limit)
        elif args.command == 'matches':
            print_matches(args.user_id)
    except MatchingError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
