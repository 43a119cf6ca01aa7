from dataclasses import dataclass

MIN_BIRTH_YEAR = 1900
MAX_BIRTH_YEAR = 2100


@dataclass(frozen=True)
class Person:
    """A household member. The name is the key used to attribute entries."""
    name: str
    year_of_birth: int

    def __post_init__(self):
        if self.name is None or not self.name.strip():
            raise ValueError("Person name cannot be blank")
        if not MIN_BIRTH_YEAR <= self.year_of_birth <= MAX_BIRTH_YEAR:
            raise ValueError(
                f"Year of birth must be between {MIN_BIRTH_YEAR} and {MAX_BIRTH_YEAR}, got {self.year_of_birth}"
            )

    def age_in_year(self, year: int) -> int:
        return year - self.year_of_birth
