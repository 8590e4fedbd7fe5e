# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Helper functions"""

import logging
import sys
from collections.abc import Iterable


def configure_logger(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Set logging options"""
    log = logging.getLogger()
    logging.basicConfig(
        encoding="utf-8",
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if debug:
        log.setLevel(logging.DEBUG)
    elif verbose:
        log.setLevel(logging.INFO)
    else:
        log.setLevel(logging.WARNING)

    return log


def log_progress(message: str) -> None:
    """Log progress messages to stderr"""
    # Clear line if no message is given
    if not message:
        sys.stderr.write("\r\033[K")
        sys.stderr.flush()
    else:
        sys.stderr.write(f"\r\033[K⏳ {message}")
        sys.stderr.flush()


def clean_usernames(usernames: Iterable[str | None] | None) -> list[str]:
    """Drop null and empty entries from a list of usernames, keep the order
    and duplicates"""
    if not usernames:
        return []
    return [user for user in usernames if user]


def unique_in_order(items: Iterable[str]) -> list[str]:
    """Remove duplicates from a list while keeping the first occurrence"""
    return list(dict.fromkeys(items))


def compare_two_lists(list1: Iterable[str], list2: Iterable[str]):
    """
    Compares two lists of strings and returns a tuple containing elements
    missing in each list and common elements. All returned lists are sorted.

    Args:
        list1 (list of str): The first list of strings.
        list2 (list of str): The second list of strings.

    Returns:
        tuple: A tuple containing three lists:
            1. The first list contains elements in `list2` that are missing in `list1`.
            2. The second list contains elements that are present in both `list1` and `list2`.
            3. The third list contains elements in `list1` that are missing in `list2`.

    Example:
        >>> list1 = ["apple", "banana", "cherry"]
        >>> list2 = ["banana", "cherry", "date", "fig"]
        >>> compare_two_lists(list1, list2)
        (['date', 'fig'], ['banana', 'cherry'], ['apple'])
    """
    # Convert lists to sets for easier comparison
    set1, set2 = set(list1), set(list2)

    # Elements in list2 that are missing in list1
    missing_in_list1 = sorted(set2 - set1)

    # Elements present in both lists
    common_elements = sorted(set1 & set2)

    # Elements in list1 that are missing in list2
    missing_in_list2 = sorted(set1 - set2)

    # Return the result as a tuple
    return (missing_in_list1, common_elements, missing_in_list2)
