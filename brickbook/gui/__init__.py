"""customtkinter presentation layer."""
