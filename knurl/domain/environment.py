"""Environment and variable contracts."""

from pydantic import Field, model_validator

from .types import ContractModel, EnvironmentId, VariableName


class Variable(ContractModel):
    """A named value stored in an environment."""

    id: str
    name: VariableName
    value: str
    # Masks the value for display only; never affects substitution
    secure: bool = False
    # Disabled variables exist but are inert for resolution
    enabled: bool = True


class Environment(ContractModel):
    """
    A named collection of variables scoped to a request collection.

    The collection store owns and persists environments; the pipeline only
    ever sees a snapshot.
    """

    id: EnvironmentId
    name: str
    description: str | None = None
    variables: dict[str, Variable] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "Environment":
        seen: set[str] = set()
        for variable in self.variables.values():
            if variable.name in seen:
                raise ValueError(f"duplicate variable name: {variable.name}")
            seen.add(variable.name)
        return self

    def get_variable(self, name: str) -> Variable | None:
        """Find a variable by name (not by mapping key)."""
        for variable in self.variables.values():
            if variable.name == name:
                return variable
        return None

    def enabled_values(self) -> dict[str, str]:
        """Map of name -> value for enabled, named variables."""
        return {
            variable.name: variable.value
            for variable in self.variables.values()
            if variable.name and variable.enabled
        }
