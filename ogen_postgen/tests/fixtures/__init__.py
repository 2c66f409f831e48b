"""Test fixtures for ogen-postgen tests.

This module provides an ogen-style ``oas_server_gen.go`` and matching
OpenAPI documents, plus helpers to build method descriptors and spec models
directly.
"""

from ogen_postgen.models import MethodDescriptor, Operation, PathItem, SpecModel

# Trimmed down oas_server_gen.go as produced by ogen for a petstore API
PETSTORE_SERVER_GO = '''\
// Code generated by ogen, DO NOT EDIT.

package api

import (
	"context"
	_ "embed"

	"github.com/google/uuid"
	ht "github.com/ogen-go/ogen/http"
)

// Handler handles operations described by OpenAPI v3 specification.
type Handler interface {
	// AddPet implements addPet operation.
	//
	// Add a new pet to the store.
	//
	// POST /pet
	AddPet(ctx context.Context, req *Pet) (AddPetRes, error)
	// DeletePet implements deletePet operation.
	//
	// DELETE /pet/{petId}
	DeletePet(ctx context.Context, params DeletePetParams) error
	// GetPetById implements getPetById operation.
	//
	// GET /pet/{petId}
	GetPetById(ctx context.Context, params GetPetByIdParams) (GetPetByIdRes, error)
	// FindPets implements findPets operation.
	//
	// GET /pet/findByTags
	FindPets(ctx context.Context, ids *[]uuid.UUID, tags ...string) ([]Pet, error)
	// GetInventory implements getInventory operation.
	//
	// GET /store/inventory
	GetInventory(ctx context.Context) (*GetInventoryOK, error)
	// Ping is not described by the OpenAPI document.
	Ping(ctx context.Context) error
	// NewError creates *ErrorStatusCode from error returned by handler.
	//
	// Used for common default response.
	NewError(ctx context.Context, err error) *ErrorStatusCode
}

// Server implements http server based on OpenAPI v3 specification and
// calls Handler to handle requests.
type Server struct {
	h   Handler
	cfg ht.Middleware
}
'''

PETSTORE_METHOD_NAMES = [
    'AddPet',
    'DeletePet',
    'GetPetById',
    'FindPets',
    'GetInventory',
    'Ping',
    'NewError',
]

_OK = {'200': {'description': 'Successful response'}}

PETSTORE_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Petstore', 'version': '1.0.0'},
    'tags': [{'name': 'pet'}, {'name': 'store'}],
    'paths': {
        '/pet': {
            'post': {'operationId': 'addPet', 'tags': ['pet'], 'responses': _OK},
        },
        '/pet/findByTags': {
            'get': {'operationId': 'findPets', 'tags': ['pet'], 'responses': _OK},
        },
        '/pet/{petId}': {
            'delete': {'operationId': 'deletePet', 'tags': ['pet'], 'responses': _OK},
            'get': {'operationId': 'getPetById', 'tags': ['pet'], 'responses': _OK},
        },
        '/store/inventory': {
            'get': {
                'operationId': 'getInventory',
                'tags': ['store', 'internal'],
                'responses': _OK,
            },
        },
    },
}

MINIMAL_SPEC = {
    'openapi': '3.1.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}


def make_method(name: str, comment: str | None = None) -> MethodDescriptor:
    """Create a method whose doc comment names ``comment`` as its operation."""
    if comment is None:
        operation = name[0].lower() + name[1:]
        comment = f'{name} implements {operation} operation.\n'
    return MethodDescriptor(
        name=name,
        doc_comment=comment,
        typed_parameters='ctx context.Context',
        parameter_names='ctx',
        returns='error',
    )


def make_spec(
    paths: dict[str, list[tuple[str, list[str]]]],
    declared_tags: list[str] | None = None,
) -> SpecModel:
    """Build a SpecModel from ``{path: [(operation_id, [tags])]}``."""
    return SpecModel(
        path_items=tuple(
            PathItem(
                path=path,
                operations=tuple(
                    Operation(identifier=identifier, tags=tuple(tags), path=path)
                    for identifier, tags in operations
                ),
            )
            for path, operations in paths.items()
        ),
        declared_tags=frozenset(declared_tags or ()),
    )
