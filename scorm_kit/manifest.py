# -*- coding: utf-8 -*-
"""Генерація imsmanifest.xml для SCORM-пакету"""

import xml.etree.ElementTree as ET
import xml.dom.minidom as minidom

MANIFEST_FILENAME = 'imsmanifest.xml'


def build_manifest(package_id, title, launch_file, resource_files, scorm_version='1.2'):
    """
    Створює текст маніфесту SCORM з однією організацією та одним ресурсом

    Наявність файлів не перевіряється - список формує PackageAssembler.

    Args:
        package_id (str): Унікальний ідентифікатор пакету
        title (str): Назва курсу
        launch_file (str): Файл запуску (href ресурсу)
        resource_files (list): Відносні шляхи файлів ресурсу, у потрібному порядку
        scorm_version (str): Версія SCORM ('1.2' або '2004')

    Returns:
        str: XML маніфесту
    """
    manifest = ET.Element('manifest')
    manifest.set('identifier', package_id)
    manifest.set('version', '1')

    # Простір імен залежно від версії SCORM
    if scorm_version == '1.2':
        manifest.set('xmlns', 'http://www.imsproject.org/xsd/imscp_rootv1p1p2')
        manifest.set('xmlns:adlcp', 'http://www.adlnet.org/xsd/adlcp_rootv1p2')
        manifest.set('xmlns:xsi', 'http://www.w3.org/2001/XMLSchema-instance')
        manifest.set('xsi:schemaLocation',
                     'http://www.imsproject.org/xsd/imscp_rootv1p1p2 imscp_rootv1p1p2.xsd')
    elif scorm_version == '2004':
        manifest.set('xmlns', 'http://www.imsglobal.org/xsd/imscp_v1p1')
        manifest.set('xmlns:adlcp', 'http://www.adlnet.org/xsd/adlcp_v1p3')
        manifest.set('xmlns:xsi', 'http://www.w3.org/2001/XMLSchema-instance')
        manifest.set('xsi:schemaLocation',
                     'http://www.imsglobal.org/xsd/imscp_v1p1 imscp_v1p1.xsd '
                     'http://www.adlnet.org/xsd/adlcp_v1p3 adlcp_v1p3.xsd')
    else:
        raise ValueError(f"Непідтримувана версія SCORM: {scorm_version}")

    metadata = ET.SubElement(manifest, 'metadata')
    schema = ET.SubElement(metadata, 'schema')
    schema.text = 'ADL SCORM'
    schemaversion = ET.SubElement(metadata, 'schemaversion')
    schemaversion.text = '1.2' if scorm_version == '1.2' else '2004 4th Edition'

    organizations = ET.SubElement(manifest, 'organizations')
    organizations.set('default', 'ORG_1')

    organization = ET.SubElement(organizations, 'organization')
    organization.set('identifier', 'ORG_1')
    org_title = ET.SubElement(organization, 'title')
    org_title.text = title

    item = ET.SubElement(organization, 'item')
    item.set('identifier', 'ITEM_1')
    item.set('identifierref', 'RES_1')
    item_title = ET.SubElement(item, 'title')
    item_title.text = title

    resources = ET.SubElement(manifest, 'resources')
    resource = ET.SubElement(resources, 'resource')
    resource.set('identifier', 'RES_1')
    resource.set('type', 'webcontent')
    # у 2004 атрибут пишеться з великої T
    if scorm_version == '1.2':
        resource.set('adlcp:scormtype', 'sco')
    else:
        resource.set('adlcp:scormType', 'sco')
    resource.set('href', launch_file)

    for file_path in resource_files:
        file_elem = ET.SubElement(resource, 'file')
        file_elem.set('href', file_path.replace('\\', '/'))

    # Форматування XML для кращої читабельності
    rough_string = ET.tostring(manifest, 'utf-8')
    reparsed = minidom.parseString(rough_string)
    return reparsed.toprettyxml(indent='  ', encoding='UTF-8').decode('utf-8')


def read_resource_files(manifest_xml):
    """Список href файлів першого ресурсу маніфесту"""
    root = ET.fromstring(manifest_xml.encode('utf-8'))
    resource = root.find('.//{*}resource')
    if resource is None:
        return []
    return [elem.get('href') for elem in resource.findall('{*}file')]
