"""Operations modules: graph editing logic kept out of the widgets.

Each module contains plain functions that operate on a GraphModel.  The
InteractionController wires them to pointer gestures and handles any
UI-owned state (such as the transient insert markers).
"""
