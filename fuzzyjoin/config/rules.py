"""Column naming rules for joined output."""

from abc import ABC, abstractmethod
from typing import Collection, List, Sequence, Tuple
from dataclasses import dataclass

from fuzzyjoin.errors import ConfigurationError


class ColumnRule(ABC):
    """Base class for renaming a column that clashes with the other table."""

    @abstractmethod
    def rename_column(self, column_name: str, taken: Collection[str]) -> str:
        """
        Produce an output name for a clashing column.

        Args:
            column_name: Name of the column in its own table
            taken: Names already present in the output

        Returns:
            str: A name not contained in `taken`
        """
        pass


class SuffixRule(ColumnRule):
    """Append a suffix, repeatedly, until the name is free."""

    def __init__(self, suffix: str):
        if not suffix:
            raise ConfigurationError("Suffix must be a non-empty string")
        self.suffix = suffix

    def rename_column(self, column_name: str, taken: Collection[str]) -> str:
        new_name = f"{column_name}{self.suffix}"
        while new_name in taken:
            new_name = f"{new_name}{self.suffix}"
        return new_name


@dataclass
class OutputRules:
    """How left and right columns are named in the joined table."""

    left_rule: ColumnRule
    right_rule: ColumnRule

    @classmethod
    def from_suffixes(cls, suffixes: Tuple[str, str] = ('.x', '.y')) -> 'OutputRules':
        left_suffix, right_suffix = suffixes
        return cls(SuffixRule(left_suffix), SuffixRule(right_suffix))

    def disambiguate(
        self,
        left_columns: Sequence[str],
        right_columns: Sequence[str]
    ) -> Tuple[List[str], List[str]]:
        """
        Rename columns that appear in both tables so both survive.

        Args:
            left_columns: Column names of the left table
            right_columns: Column names of the right table

        Returns:
            Tuple[List[str], List[str]]: Output names for left and right columns
        """
        shared = set(left_columns) & set(right_columns)
        taken = set(left_columns) | set(right_columns)

        new_left = []
        for name in left_columns:
            if name in shared:
                name = self.left_rule.rename_column(name, taken)
                taken.add(name)
            new_left.append(name)

        new_right = []
        for name in right_columns:
            if name in shared:
                name = self.right_rule.rename_column(name, taken)
                taken.add(name)
            new_right.append(name)

        return new_left, new_right
