"""Module with a parent class of the per-event data structures."""

from dataclasses import dataclass

import numpy as np

__all__ = ["DataBase"]


@dataclass(eq=False)
class DataBase:
    """Base class of the per-event data structures.

    Handles the attributes which hold 3-vectors and the comparison of
    instances which carry numpy arrays.
    """

    # 3-vector attributes, flattened to `<name>_x`, `<name>_y`, `<name>_z`
    _vec_attrs = ()

    # Attributes which may be set from numpy booleans
    _bool_attrs = ()

    # Labels of the vector components
    _axes = ("x", "y", "z")

    def __post_init__(self):
        """Gives each instance its own vector storage, casts flags.

        A default array in the attribute definition would be shared by every
        instance of the class.
        """
        for attr in self._vec_attrs:
            value = getattr(self, attr)
            if value is None:
                value = np.zeros(len(self._axes), dtype=np.float64)
            setattr(self, attr, np.asarray(value, dtype=np.float64))

        for attr in self._bool_attrs:
            setattr(self, attr, bool(getattr(self, attr)))

    def __eq__(self, other):
        """Compares every attribute, element-wise for vectors.

        Parameters
        ----------
        other : obj
            Other instance of the same class

        Returns
        -------
        bool
            `True` if all attributes of both objects are identical
        """
        if self.__class__ != other.__class__:
            return False

        for key, value in self.__dict__.items():
            other_value = getattr(other, key)
            if np.isscalar(value):
                if other_value != value:
                    return False
            elif not np.array_equal(value, other_value):
                return False

        return True
