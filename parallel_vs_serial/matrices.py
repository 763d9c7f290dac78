import torch


def alloc_mat(rows: int, cols: int) -> torch.Tensor:
    return torch.zeros(rows, cols, dtype=torch.float32)


def init_mat(
    rows: int,
    cols: int,
    seed: int | None = None,
    high: int = 10,
) -> torch.Tensor:
    generator = torch.Generator()
    if seed is not None:
        generator.manual_seed(seed)
    else:
        generator.seed()

    values = torch.randint(0, high, (rows, cols), generator=generator)
    return values.to(torch.float32)


def format_mat(a: torch.Tensor, tag: str) -> str:
    lines = [f"Matrix {tag}:"]
    for row in a.tolist():
        lines.append("".join(f"{value:6.1f}   " for value in row))
    return "\n".join(lines)


def print_mat(a: torch.Tensor, tag: str) -> None:
    print(format_mat(a, tag))


def compare_mat(a: torch.Tensor, b: torch.Tensor) -> bool:
    # Exact comparison, no tolerance.
    if a.shape != b.shape:
        return False
    return torch.equal(a, b)


def check_square_pair(a: torch.Tensor, b: torch.Tensor) -> int:
    if a.dim() != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"A must be square, got shape {tuple(a.shape)}")
    if b.shape != a.shape:
        raise ValueError(
            f"Dimension mismatch: A is {tuple(a.shape)}, B is {tuple(b.shape)}"
        )
    return a.shape[0]


if __name__ == "__main__":
    a = init_mat(4, 4, seed=0)
    print_mat(a, "A")
    print_mat(alloc_mat(2, 3), "zeros")
    print(f"A == A: {compare_mat(a, a.clone())}")
