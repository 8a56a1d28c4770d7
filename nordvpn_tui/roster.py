"""
Roster loader - turns `nordvpn countries` output into regions.
"""

from .models import Region


def parse_roster(raw: str) -> list[Region]:
    """
    Parse the list of regions, one per line.
    
    Blank lines are dropped, source order and duplicates are kept.
    
    Args:
        raw: Multi-line output of the list command.
        
    Returns:
        Regions in input order.
    """
    return [
        Region.from_id(line.strip())
        for line in raw.splitlines()
        if line.strip()
    ]
