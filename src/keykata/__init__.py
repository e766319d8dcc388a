"""keykata - practice Neovim editing against a keystroke par."""

__version__ = "0.3.0"
