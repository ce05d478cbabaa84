from tplc.tree.parser import Parser

__all__ = ["Parser"]
