import argparse
import json
from typing import Optional

from quiz.config import AnswerSubmission, QuizConfig, build_engine, load_quiz_config_from_file
from quiz.types import TraceLog


def run(
    config: QuizConfig,
    answers: Optional[list[AnswerSubmission]] = None,
    trace_log: Optional[TraceLog] = None,
) -> dict[str, object]:
    engine = build_engine(config, trace=trace_log is not None, trace_log=trace_log)

    results = []
    for answer in answers or []:
        try:
            results.append(engine.check(answer.index, answer.value).to_dict())
        except IndexError as exc:
            raise ValueError(str(exc)) from exc

    if engine.is_round_complete():
        engine.complete_round()

    return {"results": results, "state": engine.get_state().to_dict()}


def run_with_trace(
    config: QuizConfig,
    answers: Optional[list[AnswerSubmission]] = None,
) -> tuple[dict[str, object], list[str]]:
    trace_log: list[str] = []
    result = run(config, answers, trace_log=trace_log)
    return result, trace_log


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Start a times-table quiz round and replay answers from a JSON file")
    parser.add_argument("--input", required=True, help="Path to a JSON file with quiz settings and optional answers")
    parser.add_argument("--seed", type=int, default=None, help="Override the seed used to pick blank cells")
    parser.add_argument("--trace", action="store_true", help="Include engine trace output")
    return parser


if __name__ == "__main__":
    args = _build_parser().parse_args()

    try:
        config, answers = load_quiz_config_from_file(args.input)
        if args.seed is not None:
            config = config.model_copy(update={"seed": args.seed})
        if args.trace:
            result, trace_log = run_with_trace(config, answers)
            print(json.dumps({**result, "trace": trace_log}, indent=2))
        else:
            print(json.dumps(run(config, answers), indent=2))
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}")
