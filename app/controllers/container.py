from typing import cast

from dependency_injector import containers, providers

from app.controllers.auth_email.hook_controller import AuthEmailHookController
from app.controllers.auth_email.mailer import TransactionalMailer
from app.controllers.connections.connection_controller import ConnectionController
from app.controllers.emails.email_controller import EmailController
from app.controllers.emails.feed import EmailInsertFeed
from app.controllers.oauth.authorization_controller import AuthorizationController
from app.controllers.oauth.provider_client import OAuthProviderClient
from app.controllers.senders.sender_controller import SenderController
from app.repos.container import RepoContainer


class ControllerContainer(containers.DeclarativeContainer):
    repos: RepoContainer = cast(RepoContainer, providers.DependenciesContainer())

    oauth_provider_client = providers.Singleton(OAuthProviderClient)
    transactional_mailer = providers.Singleton(TransactionalMailer)
    email_insert_feed = providers.Singleton(EmailInsertFeed)

    authorization_controller = providers.Singleton(
        AuthorizationController,
        connected_account_repo=repos.connected_account,
        provider_client=oauth_provider_client,
    )

    connection_controller = providers.Singleton(ConnectionController, connected_account_repo=repos.connected_account)

    sender_controller = providers.Singleton(SenderController, tracked_sender_repo=repos.tracked_sender)

    email_controller = providers.Singleton(
        EmailController,
        tracked_sender_repo=repos.tracked_sender,
        tracked_email_repo=repos.tracked_email,
        connected_account_repo=repos.connected_account,
    )

    auth_email_hook_controller = providers.Singleton(AuthEmailHookController, mailer=transactional_mailer)
