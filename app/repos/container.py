from dependency_injector import containers, providers

from app.repos.connected_account import ConnectedAccountRepo
from app.repos.tracked_email import TrackedEmailRepo
from app.repos.tracked_sender import TrackedSenderRepo


class RepoContainer(containers.DeclarativeContainer):
    connected_account = providers.Singleton(ConnectedAccountRepo)
    tracked_email = providers.Singleton(TrackedEmailRepo)
    tracked_sender = providers.Singleton(TrackedSenderRepo)
