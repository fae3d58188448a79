"""
Navigation simulation and payload binding.
"""
from .binding import BindingResult, PayloadBinder, find_form_references, resolve_payload
from .simulator import NavigationSimulator, replay

__all__ = [
    'BindingResult',
    'PayloadBinder',
    'find_form_references',
    'resolve_payload',
    'NavigationSimulator',
    'replay',
]
