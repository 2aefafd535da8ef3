from fastapi import status

from storefront.core.authorization import AccessTypeEnum, CollectionAccess


def _grant_via_api(client, headers, collection_id, user_id, access_type):
    return client.post(
        '/api/authorization/grant-access',
        json={'collectionId': collection_id, 'userId': user_id, 'accessType': access_type},
        headers=headers,
    )


class TestMe:
    def test_anonymous(self, persistent_client):
        response = persistent_client.get('/api/me')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['kind'] == 'public'
        assert response.json()['userId'] is None

    def test_merchant(self, persistent_client, auth_headers, merchant):
        response = persistent_client.get('/api/me', headers=auth_headers(merchant))

        body = response.json()
        assert body['kind'] == 'user'
        assert body['userId'] == merchant.id
        assert body['role'] == 'merchant'
        assert body['username'] == 'merchant'

    def test_admin(self, persistent_client, auth_headers, admin_user):
        assert persistent_client.get('/api/me', headers=auth_headers(admin_user)).json()['kind'] == 'admin'

    def test_invalid_token(self, persistent_client):
        response = persistent_client.get('/api/me', headers={'Authorization': 'Bearer nonsense'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['error_type'] == 'invalid_session_token'


class TestCheckAccess:
    def test_owner(self, persistent_client, auth_headers, merchant, collection):
        response = persistent_client.post(
            '/api/authorization/check-access',
            json={'resourceType': 'collection', 'resourceId': collection.id, 'requiredLevel': 'edit'},
            headers=auth_headers(merchant),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['isAllowed'] is True

    def test_outsider_learns_nothing(self, persistent_client, auth_headers, other_merchant, collection):
        denied = persistent_client.post(
            '/api/authorization/check-access',
            json={'resourceType': 'collection', 'resourceId': collection.id, 'requiredLevel': 'view'},
            headers=auth_headers(other_merchant),
        ).json()
        missing = persistent_client.post(
            '/api/authorization/check-access',
            json={'resourceType': 'collection', 'resourceId': 'coll-doesnotexist', 'requiredLevel': 'view'},
            headers=auth_headers(other_merchant),
        ).json()

        assert denied == missing
        assert denied['isAllowed'] is False

    def test_public_views_visible_product(self, persistent_client, product):
        response = persistent_client.post(
            '/api/authorization/check-access',
            json={'resourceType': 'product', 'resourceId': product.id, 'requiredLevel': 'view'},
        )

        assert response.json()['isAllowed'] is True

    def test_only_collections_may_omit_id(self, persistent_client):
        response = persistent_client.post(
            '/api/authorization/check-access',
            json={'resourceType': 'product', 'requiredLevel': 'view'},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestGrants:
    def test_grant_upgrade_and_revoke(self, persistent_client, auth_headers, merchant, collaborator, collection):
        headers = auth_headers(merchant)

        response = _grant_via_api(persistent_client, headers, collection.id, collaborator.id, 'view')
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['accessType'] == 'view'

        response = _grant_via_api(persistent_client, headers, collection.id, collaborator.id, 'edit')
        assert response.json()['accessType'] == 'edit'

        grants = persistent_client.get(f'/api/authorization/list-grants/{collection.id}', headers=headers).json()
        assert [(g['userId'], g['accessType'], g['username']) for g in grants] == [
            (collaborator.id, 'edit', 'collaborator')
        ]

        response = persistent_client.post(
            '/api/authorization/revoke-access',
            json={'collectionId': collection.id, 'userId': collaborator.id},
            headers=headers,
        )
        assert response.status_code == status.HTTP_200_OK
        assert CollectionAccess.count(CollectionAccess.collection_id == collection.id) == 0

    def test_invalid_access_type(self, persistent_client, auth_headers, merchant, collaborator, collection):
        response = _grant_via_api(persistent_client, auth_headers(merchant), collection.id, collaborator.id, 'owner')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error_type'] == 'invalid_access_type'

    def test_self_grant(self, persistent_client, auth_headers, merchant, collaborator, collection):
        _grant_via_api(persistent_client, auth_headers(merchant), collection.id, collaborator.id, 'edit')

        response = _grant_via_api(
            persistent_client, auth_headers(collaborator), collection.id, collaborator.id, 'edit'
        )

        assert response.json()['error_type'] == 'self_grant'

    def test_owner_grant(self, persistent_client, auth_headers, admin_user, merchant, collection):
        response = _grant_via_api(persistent_client, auth_headers(admin_user), collection.id, merchant.id, 'view')

        assert response.json()['error_type'] == 'owner_grant'

    def test_owner_revoke(self, persistent_client, auth_headers, admin_user, merchant, collection):
        response = persistent_client.post(
            '/api/authorization/revoke-access',
            json={'collectionId': collection.id, 'userId': merchant.id},
            headers=auth_headers(admin_user),
        )

        assert response.json()['error_type'] == 'owner_revoke'

    def test_stranger_gets_not_found(self, persistent_client, auth_headers, other_merchant, collaborator, collection):
        response = _grant_via_api(
            persistent_client, auth_headers(other_merchant), collection.id, collaborator.id, 'view'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['detail'] == 'Not found.'
        assert CollectionAccess.count(CollectionAccess.collection_id == collection.id) == 0

    def test_anonymous_is_unauthorized(self, persistent_client, collaborator, collection):
        response = _grant_via_api(persistent_client, {}, collection.id, collaborator.id, 'view')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_grants_needs_edit(self, persistent_client, auth_headers, merchant, collaborator, collection):
        _grant_via_api(persistent_client, auth_headers(merchant), collection.id, collaborator.id, 'view')

        response = persistent_client.get(
            f'/api/authorization/list-grants/{collection.id}', headers=auth_headers(collaborator)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestTransferOwnership:
    def test_admin_transfers(self, persistent_client, auth_headers, admin_user, merchant, other_merchant, collection):
        response = persistent_client.post(
            '/api/authorization/transfer-ownership',
            json={'collectionId': collection.id, 'newOwnerId': other_merchant.id, 'preserveOldOwnerAccess': True},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['oldOwnerId'] == merchant.id
        assert body['newOwnerUsername'] == 'othermerchant'
        assert body['preservedAccess'] is True

        grant = CollectionAccess.get(
            CollectionAccess.collection_id == collection.id, CollectionAccess.user_id == merchant.id
        )
        assert grant.access_type == AccessTypeEnum.EDIT

        edit_check = persistent_client.post(
            '/api/authorization/check-access',
            json={'resourceType': 'collection', 'resourceId': collection.id, 'requiredLevel': 'edit'},
            headers=auth_headers(other_merchant),
        )
        assert edit_check.json()['isAllowed'] is True

    def test_owner_cannot_transfer(self, persistent_client, auth_headers, merchant, other_merchant, collection):
        response = persistent_client.post(
            '/api/authorization/transfer-ownership',
            json={'collectionId': collection.id, 'newOwnerId': other_merchant.id},
            headers=auth_headers(merchant),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_role_ineligible(self, persistent_client, auth_headers, admin_user, collaborator, collection):
        response = persistent_client.post(
            '/api/authorization/transfer-ownership',
            json={'collectionId': collection.id, 'newOwnerId': collaborator.id},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error_type'] == 'role_ineligible'

    def test_search_candidates(
        self, persistent_client, auth_headers, admin_user, merchant, other_merchant, collaborator
    ):
        response = persistent_client.get(
            '/api/authorization/search-transfer-candidates',
            params={'search': 'merchant', 'exclude_user_id': merchant.id},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert [candidate['id'] for candidate in response.json()] == [other_merchant.id]

    def test_search_candidates_admin_only(self, persistent_client, auth_headers, merchant):
        response = persistent_client.get(
            '/api/authorization/search-transfer-candidates', headers=auth_headers(merchant)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
