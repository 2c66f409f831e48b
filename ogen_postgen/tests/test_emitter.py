"""Tests for rendering Go source."""

import pytest
from tree_sitter import Parser

from ogen_postgen.emitter import GoServicesEmitter, go_comment, go_results, used_imports
from ogen_postgen.extractor import GO_LANGUAGE, InterfaceExtractor
from ogen_postgen.grouping import assemble, partition
from ogen_postgen.models import (
    ErrorHandlerPolicy,
    GenerationInfo,
    ImportDescriptor,
    MethodGroup,
    Strategy,
)
from ogen_postgen.specification import SpecificationLoader
from ogen_postgen.tests.fixtures import PETSTORE_SERVER_GO, PETSTORE_SPEC


def build_info(strategy=Strategy.PATHS, policy=ErrorHandlerPolicy.SEPARATE):
    interface = InterfaceExtractor().extract_source(PETSTORE_SERVER_GO.encode(), 'Handler')
    spec = SpecificationLoader().build_model(PETSTORE_SPEC)
    result = partition(interface.methods, spec, strategy)
    return assemble(interface.imports, result, policy)


def render(info, package_name='api'):
    return GoServicesEmitter().render(info, package_name)


def assert_valid_go(source):
    tree = Parser(GO_LANGUAGE).parse(source.encode())
    assert not tree.root_node.has_error, source


class TestHelpers:
    """Test the template filters."""

    def test_go_comment(self):
        text = 'AddPet implements addPet operation.\n\nPOST /pet\n'

        assert go_comment(text, '\t') == (
            '\t// AddPet implements addPet operation.\n\t//\n\t// POST /pet'
        )

    def test_go_comment_empty(self):
        assert go_comment('') == ''

    @pytest.mark.parametrize(
        'returns, expected',
        [
            ('', ''),
            ('error', ' error'),
            ('*ErrorStatusCode', ' *ErrorStatusCode'),
            ('AddPetRes, error', ' (AddPetRes, error)'),
            ('n int', ' (n int)'),
            ('map[string, int]', ' map[string, int]'),
            ('[]map[string]int', ' []map[string]int'),
            ('[]Pet, error', ' ([]Pet, error)'),
        ],
    )
    def test_go_results(self, returns, expected):
        assert go_results(returns) == expected


class TestUsedImports:
    """Test import filtering."""

    def test_only_referenced_imports(self):
        info = build_info()

        imports = used_imports(info.imports, info.groups, info.error_handler)

        assert [i.path for i in imports] == ['context', 'github.com/google/uuid']

    def test_alias_is_used_as_qualifier(self):
        group = MethodGroup(
            name='Service',
            methods=(
                InterfaceExtractor()
                .extract_source(
                    b'package api\n\nimport foo "pkg/bar"\n\n'
                    b'type Handler interface {\n\tGet() foo.Item\n}\n',
                    'Handler',
                )
                .methods
            ),
        )
        imports = [
            ImportDescriptor(path='pkg/bar', package_name='foo', alias='foo'),
            ImportDescriptor(path='pkg/unused', package_name='unused'),
        ]

        assert used_imports(imports, [group]) == imports[:1]

    def test_blank_import_is_dropped(self):
        imports = [ImportDescriptor(path='embed', alias='_')]

        assert used_imports(imports, []) == []


class TestRender:
    """Test the generated file."""

    def test_header_and_package(self):
        source = render(build_info(), 'petstore')

        assert source.startswith('// Code generated by ogen-postgen, DO NOT EDIT.\n')
        assert '\npackage petstore\n' in source

    def test_import_block(self):
        source = render(build_info())

        assert 'import (\n\t"context"\n\t"github.com/google/uuid"\n)\n' in source
        assert 'embed' not in source
        assert 'ogen/http' not in source

    def test_group_interfaces(self):
        source = render(build_info())

        assert 'type PetService interface {\n' in source
        assert 'type PetPetIdService interface {\n' in source
        assert 'type UnmatchedMethodsHandler interface {\n' in source
        assert '\tAddPet(ctx context.Context, req *Pet) (AddPetRes, error)\n' in source
        assert '\tPing(ctx context.Context) error\n' in source

    def test_doc_comments_are_kept(self):
        source = render(build_info())

        assert (
            '\t// AddPet implements addPet operation.\n'
            '\t//\n'
            '\t// Add a new pet to the store.\n'
            '\t//\n'
            '\t// POST /pet\n'
            '\tAddPet('
        ) in source

    def test_error_handler_interface(self):
        source = render(build_info())

        assert 'type ErrorHandler interface {\n' in source
        assert '\tNewError(ctx context.Context, err error) *ErrorStatusCode\n' in source
        assert '\tErrorHandler ErrorHandler\n' in source

    def test_composite_handler(self):
        source = render(build_info())

        assert 'type PostgenHandler struct {\n\tPetService PetService\n' in source
        assert 'var _ Handler = (*PostgenHandler)(nil)\n' in source

    def test_forwarders(self):
        source = render(build_info())

        assert (
            'func (h *PostgenHandler) FindPets(ctx context.Context, ids *[]uuid.UUID, '
            'tags ...string) ([]Pet, error) {\n'
            '\treturn h.PetFindByTagsService.FindPets(ctx, ids, tags...)\n'
            '}\n'
        ) in source
        assert (
            'func (h *PostgenHandler) NewError(ctx context.Context, err error) '
            '*ErrorStatusCode {\n'
            '\treturn h.ErrorHandler.NewError(ctx, err)\n'
            '}\n'
        ) in source

    def test_each_method_forwarded_once(self):
        source = render(build_info(Strategy.TAGS, ErrorHandlerPolicy.SPLICE))

        assert source.count('func (h *PostgenHandler) NewError(') == 1
        assert source.count('func (h *PostgenHandler) AddPet(') == 1
        assert 'type ErrorHandler interface' not in source

    def test_drop_policy(self):
        source = render(build_info(policy=ErrorHandlerPolicy.DROP))

        assert 'NewError' not in source
        assert 'var _ Handler' not in source

    def test_unnamed_parameters_are_named_for_forwarding(self):
        interface = InterfaceExtractor().extract_source(
            b'package api\n\nimport "context"\n\n'
            b'type Handler interface {\n'
            b'\t// Do implements do operation.\n'
            b'\tDo(context.Context, int) (n int, err error)\n'
            b'\tClose()\n'
            b'}\n',
            'Handler',
        )
        info = assemble(interface.imports, partition(interface.methods, None, Strategy.EACH))

        source = render(info)

        assert '\tDo(_ context.Context, _ int) (n int, err error)\n' in source
        assert (
            'func (h *PostgenHandler) Do(p0 context.Context, p1 int) (n int, err error) {\n'
            '\treturn h.DoHandler.Do(p0, p1)\n'
        ) in source
        assert 'func (h *PostgenHandler) Close() {\n\th.CloseHandler.Close()\n}' in source
        assert_valid_go(source)

    def test_no_imports(self):
        info = GenerationInfo()

        source = render(info)

        assert 'import' not in source
        assert 'type PostgenHandler struct {\n}\n' in source
        assert_valid_go(source)

    @pytest.mark.parametrize('strategy', list(Strategy))
    @pytest.mark.parametrize('policy', list(ErrorHandlerPolicy))
    def test_output_is_valid_go(self, strategy, policy):
        assert_valid_go(render(build_info(strategy, policy)))

    def test_custom_interface_name(self):
        source = GoServicesEmitter(interface_name='Service').render(build_info(), 'api')

        assert 'var _ Service = (*PostgenHandler)(nil)' in source
        assert 'handles a subset of the Service operations' in source


class TestOnlyErrorHandler:
    """Rendering an interface whose only method is NewError."""

    def test_splice_still_implements_handler(self):
        interface = InterfaceExtractor().extract_source(
            b'package api\n\nimport "context"\n\n'
            b'type Handler interface {\n'
            b'\tNewError(ctx context.Context, err error) *ErrorStatusCode\n'
            b'}\n',
            'Handler',
        )
        result = partition(interface.methods, None, Strategy.EACH)
        info = assemble(interface.imports, result, ErrorHandlerPolicy.SPLICE)

        source = render(info)

        assert 'type ErrorHandler interface {\n' in source
        assert 'func (h *PostgenHandler) NewError(ctx context.Context, err error) ' in source
        assert 'var _ Handler = (*PostgenHandler)(nil)\n' in source
        assert_valid_go(source)
