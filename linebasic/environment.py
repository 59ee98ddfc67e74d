from typing import Dict, Iterator, Optional

from linebasic.errors import UndefinedVariableError


class SymbolStore:
    """Maps case-sensitive variable names to numeric values for one run."""
    def __init__(self):
        self.values: Dict[str, float] = {}

    def get(self, name: str) -> float:
        if name in self.values:
            return self.values[name]
        raise UndefinedVariableError(f'undefined variable {name}')

    def lookup(self, name: str) -> Optional[float]:
        # Non-raising lookup used by PRINT
        return self.values.get(name)

    def set(self, name: str, value: float):
        self.values[name] = float(value)

    def clear(self):
        self.values.clear()

    def snapshot(self) -> Dict[str, float]:
        return dict(self.values)

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
