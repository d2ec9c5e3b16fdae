"""
Utility functions for cbinfo.

This module provides helper functions shared by the reader, the analysis
code and the command line interface.
"""
import numpy as np
import logging
from typing import Union
from pathlib import Path

logger = logging.getLogger(__name__)

def update_dict_recursively(base_dict: dict, update_with: dict) -> dict:
    """
    Recursively update a dictionary with another dictionary.
    
    Args:
        base_dict: Base dictionary to update
        update_with: Dictionary containing updates
        
    Returns:
        Updated dictionary
    """
    for k, v_update in update_with.items():
        if isinstance(v_update, dict) and k in base_dict and isinstance(base_dict[k], dict):
            update_dict_recursively(base_dict[k], v_update)
        else:
            base_dict[k] = v_update
    return base_dict

def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.
    
    Args:
        path: Directory path
        
    Returns:
        Path object for the directory
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path

def validate_array_shape(arr: np.ndarray, expected_shape: tuple, name: str) -> None:
    """
    Validate that an array has the expected shape.
    
    Args:
        arr: Array to validate
        expected_shape: Expected shape tuple
        name: Name of the array for error messages
        
    Raises:
        ValueError: If array shape doesn't match expected shape
    """
    if arr.shape != expected_shape:
        raise ValueError(f"{name} has shape {arr.shape}, expected {expected_shape}")

def safe_divide(a: np.ndarray, b: np.ndarray, fill_value: float = 0.0) -> np.ndarray:
    """
    Divide arrays elementwise, broadcasting b against a.

    Where the denominator is zero the result is fill_value instead of
    inf/nan, and no floating point warning is emitted.
    
    Args:
        a: Numerator array
        b: Denominator array
        fill_value: Value to use when denominator is zero
        
    Returns:
        Result of division with the shape of a
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.broadcast_to(np.asarray(b, dtype=np.float64), a.shape)
    with np.errstate(divide='ignore', invalid='ignore'):
        result = np.divide(a, b, out=np.full_like(a, fill_value), where=b != 0)
    return result
