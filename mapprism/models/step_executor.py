"""Step executor model: the capability contract registered per step type."""

from sqlmodel import JSON, Column, Field, SQLModel


class StepExecutorBase(SQLModel):
    """Capability contract for one step type.

    Args:
        step_type: Step type name referenced by recipe steps.
        workflow: Identifier of the external workflow that runs the step.
        accepts: Input slot name -> required artifact type.
        produces: Output artifact name -> produced artifact type.
    """

    step_type: str = Field(primary_key=True, min_length=1, max_length=100)
    workflow: str = Field(default="", max_length=200)
    accepts: dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    produces: dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))


class StepExecutor(StepExecutorBase, table=True):
    """Registered step executor."""

    __tablename__ = "step_executor"


class StepExecutorCreate(StepExecutorBase):
    """Schema for registering a step executor."""
