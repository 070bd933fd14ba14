from backoffice.services.records import CollectionService


class ClientService(CollectionService):
    collection = "clients"
