def ctx_prefix(*, job: str, run: int | str, execution: str | None = None) -> str:
    base = f"job={job} run={run}"
    return f"{base} exec={execution}" if execution is not None else base
