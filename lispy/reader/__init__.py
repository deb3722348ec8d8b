from lispy.reader.ast import AstNode
from lispy.reader.parser import lex, parse, TokenStream
from lispy.reader.reader import read, read_source
