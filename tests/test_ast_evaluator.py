import pytest

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.evaluator.token_parser import EvaluationError, parse_tokens, render_tokens
from adapters.input_classifier.keystroke_classifier import KeystrokeClassifier
from contracts import BinOpNode, EvalStatus, Token


def _tokens(code: str) -> list[Token]:
    """'2 + 3 * 4' → tokeny; każde słowo klasyfikowane jak po Enter."""
    classifier = KeystrokeClassifier()
    return [classifier.classify(part) for part in code.split()]


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("2 + 3 * 4", 14),
        pytest.param("( 2 + 3 ) * 4", 20),
        pytest.param("10 / 5 / 2", 1),
        pytest.param("10 - 4 - 3", 3),
        pytest.param("2 ^ 3 ^ 2", 512),
        pytest.param("2 * 3 ^ 2", 18),
        pytest.param("- 2 ^ 2", -4),
        pytest.param("2 ^ - 1", 0.5),
        pytest.param("- ( 1 + 2 )", -3),
        pytest.param("+ 5", 5),
        pytest.param("2 * - 3", -6),
        pytest.param("0.1 + 0.2", 0.3),
        pytest.param("7 / 2", 3.5),
        pytest.param("( ( ( 1 ) ) )", 1),
        pytest.param("4 ^ 0.5", 2.0),
    ],
)
def test_evaluate_arithmetic(code, expected):
    result = ASTEvaluator().evaluate(_tokens(code))

    assert result.status == EvalStatus.OK
    assert result.value == pytest.approx(expected)


def test_exact_integer_results_are_ints():
    result = ASTEvaluator().evaluate(_tokens("2 + 3 * 4"))

    assert result.value == 14
    assert isinstance(result.value, int)
    assert result.is_exact


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("+"),
        pytest.param("2 +"),
        pytest.param("* 2"),
        pytest.param("( 2 + 3"),
        pytest.param("2 + 3 )"),
        pytest.param("( )"),
        pytest.param("2 3"),
        pytest.param("1 / 0"),
        pytest.param("1 / ( 2 - 2 )"),
        pytest.param("0 ^ - 1"),
        pytest.param("abc + 1"),
        pytest.param("( - 8 ) ^ 0.5"),
        pytest.param("10 ^ 400 ^ 2"),
    ],
)
def test_malformed_formulas_are_unevaluable(code):
    result = ASTEvaluator().evaluate(_tokens(code))

    assert result.status == EvalStatus.UNEVALUABLE
    assert result.value is None
    assert result.error


def test_empty_formula_is_unevaluable():
    result = ASTEvaluator().evaluate([])

    assert not result.evaluable
    assert result.display() == "Error"


def test_unbound_variable_contributes_zero():
    tokens = [Token.number(5), Token.operator("+"), Token.variable(id="1", name="revenue")]

    result = ASTEvaluator().evaluate(tokens)

    assert result.value == 5


def test_variable_bound_through_env_by_id():
    tokens = [Token.variable(id="1", name="revenue"), Token.operator("*"), Token.number(2)]

    result = ASTEvaluator().evaluate(tokens, env={"1": 1.5})

    assert result.value == 3
    assert "revenue = 3/2" in result.steps


def test_text_that_looks_like_code_is_never_executed():
    tokens = [Token.text("__import__('os').system('true')"), Token.operator("+"), Token.number(1)]

    result = ASTEvaluator().evaluate(tokens)

    assert not result.evaluable


def test_evaluate_is_idempotent_and_read_only():
    tokens = _tokens("2 + 3")
    evaluator = ASTEvaluator()

    first = evaluator.evaluate(tokens)
    second = evaluator.evaluate(tokens)

    assert first == second
    assert tokens == _tokens("2 + 3")


def test_steps_follow_evaluation_order():
    result = ASTEvaluator().evaluate(_tokens("2 + 3 * 4"))

    assert result.steps == ["3 * 4 = 12", "2 + 12 = 14"]


def test_parse_tokens_builds_right_associative_power():
    ast = parse_tokens(_tokens("2 ^ 3 ^ 2"))

    assert isinstance(ast, BinOpNode)
    assert ast.op == "^"
    assert isinstance(ast.right, BinOpNode)


def test_parse_tokens_rejects_text():
    with pytest.raises(EvaluationError):
        parse_tokens([Token.text("abc")])


def test_render_tokens_uses_variable_names():
    tokens = [
        Token.operator("("),
        Token.variable(id="1", name="revenue"),
        Token.operator("-"),
        Token.number(2.5),
        Token.operator(")"),
    ]

    assert render_tokens(tokens) == "(revenue - 2.5)"


def test_long_left_associative_chain_is_evaluated():
    tokens = [Token.number(1)]
    for _ in range(1500):
        tokens += [Token.operator("+"), Token.number(1)]

    result = ASTEvaluator().evaluate(tokens)

    assert result.status == EvalStatus.OK
    assert result.value == 1501


def test_deep_nesting_is_unevaluable_not_an_exception():
    tokens = [Token.operator("(")] * 400 + [Token.number(1)] + [Token.operator(")")] * 400

    result = ASTEvaluator().evaluate(tokens)

    assert result.status == EvalStatus.UNEVALUABLE
    assert "zagnieżdżenie" in result.error


def test_long_power_chain_is_unevaluable_not_an_exception():
    tokens = [Token.number(1)]
    for _ in range(1500):
        tokens += [Token.operator("^"), Token.number(1)]

    assert ASTEvaluator().evaluate(tokens).display() == "Error"


def test_moderate_nesting_still_evaluates():
    tokens = [Token.operator("(")] * 50 + [Token.number(7)] + [Token.operator(")")] * 50

    assert ASTEvaluator().evaluate(tokens).value == 7
