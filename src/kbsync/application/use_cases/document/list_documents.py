"""List documents use case."""

from kbsync.application.dto.document_dto import DocumentOutput


class ListDocumentsUseCase:
    """List the catalog, newest upload first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> list[DocumentOutput]:
        async with self._uow_factory() as uow:
            documents = await uow.documents.list()
        return [DocumentOutput.from_entity(d) for d in documents]
