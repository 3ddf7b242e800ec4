"""Get knowledge aggregate use case."""

from kbsync.application.dto.document_dto import AggregateOutput


class GetKnowledgeUseCase:
    """Read the last committed aggregate. Never blocks on writers."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> AggregateOutput:
        async with self._uow_factory() as uow:
            aggregate = await uow.aggregate.get()
        return AggregateOutput.from_entity(aggregate)
