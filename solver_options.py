from enum import Enum
from typing import NamedTuple, Optional

from exceptions import ConfigurationError

class ConstructionOption(Enum):
    RANDOM = 1
    PROBABLE = 2
    PROBABLE_NEIGHBORHOOD = 3

class LocalOptimizationOption(Enum):
    ADD_NEAREST = 1
    REBUILD_PROBABLE = 2
    REBUILD_PROBABLE_NEIGHBORHOOD = 3
    REBUILD_PROBABLE_AND_ADD_NEAREST = 4
    REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST = 5

    @property
    def is_rebuild(self) -> bool:
        return self is not LocalOptimizationOption.ADD_NEAREST

    @property
    def uses_neighborhood(self) -> bool:
        return self in (LocalOptimizationOption.REBUILD_PROBABLE_NEIGHBORHOOD,
                        LocalOptimizationOption.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST)

    @property
    def adds_nearest(self) -> bool:
        return self in (LocalOptimizationOption.REBUILD_PROBABLE_AND_ADD_NEAREST,
                        LocalOptimizationOption.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST)

class SolverKind(Enum):
    GREEDY = "greedy"
    ABC = "abc"
    TABU = "tabu"

class SolverConfiguration(NamedTuple):
    kind: SolverKind
    construction: Optional[ConstructionOption]
    local_optimization: Optional[LocalOptimizationOption]

_C = ConstructionOption
_L = LocalOptimizationOption

class SolverOption(Enum):
    """
    Named solver configurations used by experiments and the command line.
    ABC names read <construction><operator>: R random, P probable,
    Pn probable neighborhood; An add nearest, Rp rebuild probable,
    Rpn rebuild probable neighborhood, ...aan rebuild then add nearest.
    """
    GREEDY = SolverConfiguration(SolverKind.GREEDY, None, None)
    ABC_R_AN = SolverConfiguration(SolverKind.ABC, _C.RANDOM, _L.ADD_NEAREST)
    ABC_P_AN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE, _L.ADD_NEAREST)
    ABC_PN_AN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE_NEIGHBORHOOD, _L.ADD_NEAREST)
    ABC_R_RP = SolverConfiguration(SolverKind.ABC, _C.RANDOM, _L.REBUILD_PROBABLE)
    ABC_P_RP = SolverConfiguration(SolverKind.ABC, _C.PROBABLE, _L.REBUILD_PROBABLE)
    ABC_PN_RP = SolverConfiguration(SolverKind.ABC, _C.PROBABLE_NEIGHBORHOOD, _L.REBUILD_PROBABLE)
    ABC_R_RPN = SolverConfiguration(SolverKind.ABC, _C.RANDOM, _L.REBUILD_PROBABLE_NEIGHBORHOOD)
    ABC_P_RPN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE, _L.REBUILD_PROBABLE_NEIGHBORHOOD)
    ABC_PN_RPN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE_NEIGHBORHOOD, _L.REBUILD_PROBABLE_NEIGHBORHOOD)
    ABC_R_RPAAN = SolverConfiguration(SolverKind.ABC, _C.RANDOM, _L.REBUILD_PROBABLE_AND_ADD_NEAREST)
    ABC_P_RPAAN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE, _L.REBUILD_PROBABLE_AND_ADD_NEAREST)
    ABC_PN_RPAAN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE_NEIGHBORHOOD, _L.REBUILD_PROBABLE_AND_ADD_NEAREST)
    ABC_R_RPNAAN = SolverConfiguration(SolverKind.ABC, _C.RANDOM, _L.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST)
    ABC_P_RPNAAN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE, _L.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST)
    ABC_PN_RPNAAN = SolverConfiguration(SolverKind.ABC, _C.PROBABLE_NEIGHBORHOOD,
                                        _L.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST)
    TABU_RP = SolverConfiguration(SolverKind.TABU, None, _L.REBUILD_PROBABLE)
    TABU_RPN = SolverConfiguration(SolverKind.TABU, None, _L.REBUILD_PROBABLE_NEIGHBORHOOD)
    TABU_RPAAN = SolverConfiguration(SolverKind.TABU, None, _L.REBUILD_PROBABLE_AND_ADD_NEAREST)
    TABU_RPNAAN = SolverConfiguration(SolverKind.TABU, None, _L.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST)

    @property
    def kind(self) -> SolverKind:
        return self.value.kind

    @property
    def construction(self) -> Optional[ConstructionOption]:
        return self.value.construction

    @property
    def local_optimization(self) -> Optional[LocalOptimizationOption]:
        return self.value.local_optimization

    @property
    def label(self) -> str: #"AbcPnRpaan", the short name used in reports
        return "".join(part.capitalize() for part in self.name.split("_"))

def parse_solver_option(name) -> SolverOption:
    #accepts an enum member, its name ("ABC_P_RP") or its label ("AbcPRp"), case-insensitive
    if isinstance(name, SolverOption):
        return name
    key = str(name).strip().replace("-", "_")
    for option in SolverOption:
        if key.upper() == option.name or key.lower() == option.label.lower():
            return option
    raise ConfigurationError(f"unknown solver option: {name!r}")

def require_option(value, enum_type):
    if not isinstance(value, enum_type):
        raise ConfigurationError(f"unknown {enum_type.__name__}: {value!r}")
    return value

def require_positive(name: str, value: float) -> float:
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value
