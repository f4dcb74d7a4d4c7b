import pytest
from latex_canvas.config import ParseConfig
from latex_canvas.errors import (
    StructureError,
    DanglingAttachmentError,
    DuplicateAttachmentError,
    DelimiterMismatchError,
    MalformedEnvironmentError,
    EnvironmentMismatchError,
    UnknownCommandError,
    UnclosedScopeError
)
from latex_canvas.models import LexemeKind, NodeType, create_document, create_environment, create_node, Lexeme
from latex_canvas.parser import LaTeXParser, ParseContext, parse_latex
from latex_canvas.visitor import delimiter_sequence
from test_utils import line_contents


def first_line(document):
    return document.children[0].children[0].children[0]


class TestStructure:

    def test_document_skeleton(self, latex_parser):
        """Test the implicit document environment."""
        document = latex_parser.parse("x")
        assert document.node_type == NodeType.DOCUMENT
        environment = document.children[0]
        assert environment.node_type == NodeType.ENVIRONMENT
        assert environment.name == "document"
        assert line_contents(document) == [["x"]]

    def test_empty_input(self, latex_parser):
        """Test that empty input yields one empty line."""
        assert line_contents(latex_parser.parse("")) == [[]]

    def test_paragraphs(self, latex_parser):
        """Test that a blank line starts a new paragraph."""
        document = latex_parser.parse("a\n\nb")
        environment = document.children[0]
        assert len(environment.children) == 2
        assert all(len(paragraph.children) == 1 for paragraph in environment.children)
        assert line_contents(document) == [["a"], ["b"]]

    def test_trailing_blank_line(self, latex_parser):
        """Test that a trailing blank line leaves an empty paragraph."""
        document = latex_parser.parse("a\n\n")
        environment = document.children[0]
        assert len(environment.children) == 2
        assert line_contents(document) == [["a"], []]

    def test_line_then_paragraph(self, latex_parser):
        """Test mixing line and paragraph breaks."""
        document = latex_parser.parse("a\\\\b\n\nc\\\\d")
        environment = document.children[0]
        assert [len(p.children) for p in environment.children] == [2, 2]
        assert line_contents(document) == [["a"], ["b"], ["c"], ["d"]]

    def test_lines(self, latex_parser):
        """Test that a line break starts a new line in the same paragraph."""
        document = latex_parser.parse("a\\\\b")
        environment = document.children[0]
        assert len(environment.children) == 1
        assert len(environment.children[0].children) == 2
        assert line_contents(document) == [["a"], ["b"]]

    def test_superscript(self, latex_parser):
        """Test x^2."""
        x = first_line(latex_parser.parse("x^2")).children[0]
        assert x.text == "x"
        assert x.superscript.text == "^"
        assert [c.text for c in x.superscript.children] == ["2"]
        assert x.subscript is None

    def test_sub_and_superscript(self, latex_parser):
        """Test x_2^3 attaches both slots to x."""
        line = first_line(latex_parser.parse("x_2^3"))
        assert len(line.children) == 1
        x = line.children[0]
        assert x.subscript.children[0].text == "2"
        assert x.superscript.children[0].text == "3"

    def test_script_takes_one_lexeme(self, latex_parser):
        """Test that a script without braces takes the next lexeme only."""
        line = first_line(latex_parser.parse("x^2y"))
        assert [c.text for c in line.children] == ["x", "y"]

    def test_braced_script_matches_bare_script(self, latex_parser):
        """Test that x^{2} and x^2 produce the same tree."""
        assert latex_parser.parse("x^{2}").to_dict() == latex_parser.parse("x^2").to_dict()

    def test_braced_script_with_several_children(self, latex_parser):
        """Test that multi-lexeme script groups are kept."""
        x = first_line(latex_parser.parse("x^{a+b}")).children[0]
        group = x.superscript.children[0]
        assert group.node_type == NodeType.BRACE_GROUP
        assert [c.text for c in group.children] == ["a", "+", "b"]

    def test_nested_scripts(self, latex_parser):
        """Test x^{y^z}."""
        x = first_line(latex_parser.parse("x^{y^z}")).children[0]
        y = x.superscript.children[0]
        assert y.text == "y"
        assert y.superscript.children[0].text == "z"

    def test_paren_group(self, latex_parser):
        """Test (a+b)."""
        line = first_line(latex_parser.parse("(a+b)"))
        assert len(line.children) == 1
        group = line.children[0]
        assert group.node_type == NodeType.PAREN_GROUP
        assert group.text == "("
        assert [c.text for c in group.children] == ["a", "+", "b"]

    def test_group_with_script(self, latex_parser):
        """Test scripts attached to a group."""
        group = first_line(latex_parser.parse("(a+b)^2")).children[0]
        assert group.superscript.children[0].text == "2"

    def test_delimiters_nest_as_written(self, latex_parser):
        """Test that group nesting reproduces the bracket sequence."""
        for latex in ["([{a}])", "(a)[b]{c}", "((a)(b))", "{(a)[b]}"]:
            expected = "".join(ch for ch in latex if ch in "()[]{}")
            assert delimiter_sequence(latex_parser.parse(latex)) == expected

    def test_unwrapped_script_braces_are_recorded(self, latex_parser):
        """Test that unwrapping x^{(a)} keeps its braces in the bracket sequence."""
        for latex in ["()^{()}", "x^{2}+y_{(a)}", "x^{y^{z}}"]:
            expected = "".join(ch for ch in latex if ch in "()[]{}")
            assert delimiter_sequence(latex_parser.parse(latex)) == expected

    def test_fraction(self, latex_parser):
        """Test \\dfrac{1}{2}."""
        line = first_line(latex_parser.parse(r"\dfrac{1}{2}"))
        assert len(line.children) == 1
        fraction = line.children[0]
        assert fraction.kind == LexemeKind.FRACTION
        assert len(fraction.children) == 2
        assert all(c.node_type == NodeType.BRACE_GROUP for c in fraction.children)
        assert [c.children[0].text for c in fraction.children] == ["1", "2"]

    def test_fraction_without_braces(self, latex_parser):
        """Test that arguments may be single lexemes."""
        line = first_line(latex_parser.parse(r"\frac a b c"))
        assert [c.text for c in line.children] == ["\\frac", "c"]
        assert [c.text for c in line.children[0].children] == ["a", "b"]

    @pytest.mark.parametrize("latex,arity", [
        (r"\sqrt{x}", 1),
        (r"\sin x", 1),
        (r"\log{n}", 1),
        (r"\binom{n}{k}", 2),
        (r"\tfrac{1}{x+1}", 2),
    ])
    def test_fixed_arity(self, latex_parser, latex, arity):
        """Test that fixed-arity nodes get exactly their arguments."""
        node = first_line(latex_parser.parse(latex)).children[0]
        assert len(node.children) == arity

    def test_nested_arity(self, latex_parser):
        """Test arguments that are themselves fixed-arity commands."""
        line = first_line(latex_parser.parse(r"\frac{\sqrt{2}}{3} + 1"))
        assert [c.text for c in line.children] == ["\\frac", "+", "1"]
        numerator = line.children[0].children[0]
        assert numerator.children[0].kind == LexemeKind.SQUARE_ROOT

    def test_script_argument_is_command(self, latex_parser):
        """Test x^\\frac{1}{2}."""
        line = first_line(latex_parser.parse(r"x^\frac{1}{2} y"))
        assert [c.text for c in line.children] == ["x", "y"]
        assert line.children[0].superscript.children[0].kind == LexemeKind.FRACTION

    def test_cases_environment(self, latex_parser):
        """Test \\begin{cases}a\\\\b\\end{cases}."""
        line = first_line(latex_parser.parse(r"\begin{cases}a\\b\end{cases}"))
        assert len(line.children) == 1
        cases = line.children[0]
        assert cases.node_type == NodeType.ENVIRONMENT
        assert cases.name == "cases"
        assert len(cases.children) == 1
        lines = cases.children[0].children
        assert [[c.text for c in l.children] for l in lines] == [["a"], ["b"]]

    def test_environment_restores_outer_line(self, latex_parser):
        """Test content after \\end goes back to the enclosing line."""
        document = latex_parser.parse(r"f = \begin{cases}a\\b\end{cases} + c")
        assert line_contents(document) == [["f", "=", "environment", "+", "c"]]

    def test_environment_inside_group(self, latex_parser):
        """Test environments nested in groups."""
        group = first_line(latex_parser.parse(r"(\begin{cases}a\\b\end{cases})")).children[0]
        assert group.node_type == NodeType.PAREN_GROUP
        assert group.children[0].name == "cases"

    def test_paragraph_inside_environment(self, latex_parser):
        """Test that paragraph breaks stay inside the environment."""
        document = latex_parser.parse("\\begin{cases}a\n\nb\\end{cases}")
        cases = first_line(document).children[0]
        assert len(cases.children) == 2
        assert len(document.children[0].children) == 1

    def test_operator_name_without_arity(self, latex_parser):
        """Test that \\lim takes no arguments."""
        line = first_line(latex_parser.parse(r"\lim_{x \to 0} x"))
        assert [c.text for c in line.children] == ["\\lim", "x"]

    def test_unknown_command_passes_through(self, latex_parser):
        """Test lenient handling of unknown commands."""
        node = first_line(latex_parser.parse(r"\foo + 1")).children[0]
        assert node.node_type == NodeType.PLAIN
        assert node.kind == LexemeKind.UNKNOWN
        assert node.text == "\\foo"

    def test_parse_latex_helper(self):
        """Test module level convenience function."""
        assert line_contents(parse_latex("a + b")) == [["a", "+", "b"]]

    def test_parser_is_reusable(self, latex_parser):
        """Test that parses do not share state."""
        with pytest.raises(UnclosedScopeError):
            latex_parser.parse("(a")
        first = latex_parser.parse("a\\\\b")
        second = latex_parser.parse("c")
        assert line_contents(first) == [["a"], ["b"]]
        assert line_contents(second) == [["c"]]


class TestErrors:

    def test_unclosed_group(self, latex_parser):
        """Test (a fails at end of input."""
        with pytest.raises(UnclosedScopeError) as exc_info:
            latex_parser.parse("(a")
        error = exc_info.value
        assert error.lexeme.text == "("
        assert error.position == 0
        assert "end of input" in str(error)

    def test_unclosed_group_is_a_value_error(self, latex_parser):
        """Test the error hierarchy."""
        with pytest.raises(ValueError):
            latex_parser.parse("[a")

    def test_missing_argument(self, latex_parser):
        """Test fixed-arity command without all arguments."""
        with pytest.raises(UnclosedScopeError, match="expects 2"):
            latex_parser.parse(r"\frac{1}")

    def test_unclosed_environment(self, latex_parser):
        """Test \\begin without \\end."""
        with pytest.raises(UnclosedScopeError) as exc_info:
            latex_parser.parse(r"\begin{cases}a")
        assert exc_info.value.lexeme.text == "\\begin"

    def test_line_break_inside_group(self, latex_parser):
        """Test that breaks may not cut through open groups."""
        with pytest.raises(UnclosedScopeError):
            latex_parser.parse("(a\\\\b)")
        with pytest.raises(UnclosedScopeError):
            latex_parser.parse("(a\n\nb)")

    def test_allow_unclosed(self):
        """Test lenient mode returns the partial tree."""
        parser = LaTeXParser(ParseConfig(allow_unclosed=True))
        group = first_line(parser.parse("(a")).children[0]
        assert group.node_type == NodeType.PAREN_GROUP
        assert [c.text for c in group.children] == ["a"]

    @pytest.mark.parametrize("latex", ["^2", "_x", "(^2)", "a\\\\^2"])
    def test_dangling_attachment(self, latex_parser, latex):
        """Test scripts with nothing to attach to."""
        with pytest.raises(DanglingAttachmentError):
            latex_parser.parse(latex)

    def test_attachment_to_environment(self, latex_parser):
        """Test that environments do not take scripts."""
        with pytest.raises(DanglingAttachmentError):
            latex_parser.parse(r"\begin{cases}a\end{cases}^2")

    @pytest.mark.parametrize("latex", ["x^2^3", "x_1_2", "(a)^2^3"])
    def test_duplicate_attachment(self, latex_parser, latex):
        """Test second script in the same slot."""
        with pytest.raises(DuplicateAttachmentError):
            latex_parser.parse(latex)

    @pytest.mark.parametrize("latex", ["(a]", "a)", "[a}", r"\frac{1})"])
    def test_mismatched_delimiter(self, latex_parser, latex):
        """Test closers without a matching opener."""
        with pytest.raises(DelimiterMismatchError):
            latex_parser.parse(latex)

    def test_mismatched_delimiter_position(self, latex_parser):
        """Test error points at the offending closer."""
        with pytest.raises(DelimiterMismatchError) as exc_info:
            latex_parser.parse("(a]")
        assert exc_info.value.position == 2
        assert exc_info.value.lexeme.text == "]"

    @pytest.mark.parametrize("latex", [
        r"\begin cases", r"\begin{cases", r"\begin{1}", r"\begin", r"\end{}"
    ])
    def test_malformed_environment(self, latex_parser, latex):
        """Test \\begin/\\end without {name}."""
        with pytest.raises(MalformedEnvironmentError):
            latex_parser.parse(latex)

    def test_mismatched_environment(self, latex_parser):
        """Test \\end naming another environment."""
        with pytest.raises(EnvironmentMismatchError, match="cases"):
            latex_parser.parse(r"\begin{cases}a\end{matrix}")

    def test_end_without_begin(self, latex_parser):
        """Test \\end at document level."""
        with pytest.raises(EnvironmentMismatchError):
            latex_parser.parse(r"a\end{cases}")

    def test_end_with_open_group(self, latex_parser):
        """Test \\end while a group is still open."""
        with pytest.raises(UnclosedScopeError):
            latex_parser.parse(r"\begin{cases}(a\end{cases}")

    def test_strict_unknown_command(self, strict_parser):
        """Test strict mode rejects unknown commands."""
        with pytest.raises(UnknownCommandError) as exc_info:
            strict_parser.parse(r"x + \foo")
        assert exc_info.value.position == 4

    def test_input_too_long(self):
        """Test input length limit."""
        parser = LaTeXParser(ParseConfig(max_input_length=5))
        with pytest.raises(ValueError, match="too long"):
            parser.parse("x" * 6)

    def test_error_to_dict(self, latex_parser):
        """Test error entry shape."""
        with pytest.raises(StructureError) as exc_info:
            latex_parser.parse("(a")
        assert exc_info.value.to_dict() == {
            'type': 'unclosed_scope',
            'message': exc_info.value.message,
            'position': 0,
            'token': '('
        }


class TestParseContext:

    def test_initial_state(self):
        """Test the context starts on the document's first line."""
        document = create_document()
        context = ParseContext(document)
        assert context.top.node is document.children[0].children[0].children[0]
        assert context.current_line is context.top.node
        assert context.is_balanced
        assert context.open_frames == []

    def test_start_paragraph(self):
        """Test a new paragraph moves the bottom frame to its line."""
        document = create_document()
        context = ParseContext(document)
        context.add_child(create_node(Lexeme("a", LexemeKind.ALPHABET)))

        context.start_paragraph()
        environment = document.children[0]
        assert len(environment.children) == 2
        assert context.current_paragraph is environment.children[1]
        assert context.top.node is environment.children[1].children[0]
        assert context.top.node.children == []
        assert context.depth == 1

    def test_current_line_follows_environment(self):
        """Test current_line tracks the innermost open environment."""
        document = create_document()
        context = ParseContext(document)
        cases = context.add_child(create_environment("cases"))
        context.open_environment(cases)
        assert context.current_line is cases.children[0].children[0]

        context.start_paragraph()
        assert context.current_paragraph is cases.children[1]
        assert context.top.node is cases.children[1].children[0]

        context.close_environment()
        assert context.current_line is document.children[0].children[0].children[0]

    def test_pop_completed(self):
        """Test that complete frames are popped in a chain."""
        context = ParseContext(create_document())
        fraction = context.add_child(create_node(Lexeme("\\frac", LexemeKind.FRACTION)))
        context.push_state(fraction, 2)
        root = context.add_child(create_node(Lexeme("\\sqrt", LexemeKind.SQUARE_ROOT)))
        context.push_state(root, 1)

        context.add_child(create_node(Lexeme("2", LexemeKind.NUMBER)))
        context.pop_completed()
        assert context.top.node is fraction

        context.add_child(create_node(Lexeme("3", LexemeKind.NUMBER)))
        context.pop_completed()
        assert context.is_balanced
