from .settings import CalculatorSettings, load_settings

__all__ = ["CalculatorSettings", "load_settings"]
