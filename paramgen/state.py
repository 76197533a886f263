import os, typing, dataclasses

from .common        import ParamgenException, PARAMGEN_CONFIG_FILENAME, file_load_yaml
from .params.suggest import invalid_key_error


@dataclasses.dataclass
class GenConfig:
    # pylint: disable=too-many-instance-attributes
    skip_dirs:          typing.List[str] = dataclasses.field(default_factory=lambda: ["all", "codegen", "util"])
    params_dir:         str = "params"
    output_filename:    str = "gen_params.py"
    build_tag:          str = "templatecodegen"
    marker:             str = "+"
    strict_annotations: bool = False

    @staticmethod
    def from_dict(d: dict) -> "GenConfig":
        """ Create a GenConfig from a dictionary whose keys are a subset of
            the fields of GenConfig. Unknown keys are rejected. """
        if d is None:
            d = {}

        if not isinstance(d, dict):
            raise ParamgenException(f"{PARAMGEN_CONFIG_FILENAME} must contain a mapping, not {type(d).__name__}.")

        names = [ field.name for field in dataclasses.fields(GenConfig) ]
        for key in d:
            if key not in names:
                raise ParamgenException(invalid_key_error("config", str(key), names))

        r = GenConfig(**d)
        r.check()

        return r

    def check(self) -> None:
        if not isinstance(self.skip_dirs, list) or not all(isinstance(s, str) for s in self.skip_dirs):
            raise ParamgenException("skip_dirs must be a list of directory names.")

        for name in ["params_dir", "output_filename", "build_tag", "marker"]:
            value = getattr(self, name)
            if not isinstance(value, str) or len(value.strip()) == 0:
                raise ParamgenException(f"{name} must be a non-empty string.")

        if not isinstance(self.strict_annotations, bool):
            raise ParamgenException("strict_annotations must be true or false.")

        if not self.output_filename.endswith(".py"):
            raise ParamgenException(f"output_filename must name a Python module, got {self.output_filename!r}.")

    def items(self) -> typing.Iterable[typing.Tuple[str, typing.Any]]:
        return dataclasses.asdict(self).items()

    def __str__(self) -> str:
        """ Returns a string like "params_dir=params & output_filename=gen_params.py" """
        return ' & '.join(f"{k}={v}" for k, v in self.items())


def load_config(dirpath: str) -> GenConfig:
    """ Load paramgen.yaml from dirpath if present, else return the defaults. """
    filepath = os.path.join(dirpath, PARAMGEN_CONFIG_FILENAME)
    if not os.path.isfile(filepath):
        return GenConfig()

    return GenConfig.from_dict(file_load_yaml(filepath))
