import typer


class TyperConfirm:
    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    def confirm(self, prompt: str) -> bool:
        if self.assume_yes:
            typer.echo(f"{prompt} [y/N]: y", err=True)
            return True
        return typer.confirm(prompt, default=False, err=True)
