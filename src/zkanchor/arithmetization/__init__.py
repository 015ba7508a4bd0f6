from .constraints import ConstraintSystem, ConstraintTemplate, LinearCombination
from .r1cs import R1CS

__all__ = ["ConstraintSystem", "ConstraintTemplate", "LinearCombination", "R1CS"]
