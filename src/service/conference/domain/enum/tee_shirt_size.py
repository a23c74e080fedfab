from enum import StrEnum


class TeeShirtSize(StrEnum):
    NOT_SPECIFIED = 'NOT_SPECIFIED'
    XS = 'XS'
    S = 'S'
    M = 'M'
    L = 'L'
    XL = 'XL'
    XXL = 'XXL'
    XXXL = 'XXXL'
