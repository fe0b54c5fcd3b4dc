class InternalURIs:
    HEALTH = "/healthz"
    API = "/api"
    V1 = API + "/v1"
    QUEUE = V1 + "/queues/{category}"
    BACKUPS = V1 + "/backups"
